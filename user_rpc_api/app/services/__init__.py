"""
Service layer.

``UserStore`` holds the records, ``UserService`` implements the
procedures on top of it.  Handlers never touch the store directly.
"""
