"""TeamDesk — multi-tenant team workspace.

Shared tasks, projects, and sales leads for small teams. Every record
belongs to exactly one team and is only visible to that team's members.
"""

__version__ = "0.1.0"
