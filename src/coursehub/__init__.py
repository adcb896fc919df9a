"""CourseHub — session-authenticated course management backend.

Users register and log in with email/password, get a server-side
session cookie, and manage courses they own. Admins manage everyone.
"""

__version__ = "0.1.0"
