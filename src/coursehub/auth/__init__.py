"""Authentication and authorization.

Users log in with email/password and receive an opaque, signed session
cookie. Each request resolves that cookie to a server-side session and
the session's user_id claim to an Identity. Handlers then ask the
policy module whether that identity may touch a given resource.
"""
