"""Users app package.

Defines the custom user model used as AUTH_USER_MODEL. Staff members
operate the admin dashboard; guests are bound to the stay they were
issued credentials for and are identified to the booking engine only by
that opaque stay id.
"""
