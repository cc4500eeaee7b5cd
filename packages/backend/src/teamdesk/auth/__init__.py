"""Authentication and authorization.

Learn: Users log in with email/password and receive a single JWT that
carries their identity claims, including their team. Every protected
route resolves that token to a CurrentIdentity, and every query over
team data is scoped by the identity's team_id.
"""
