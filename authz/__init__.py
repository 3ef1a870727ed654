"""authz/ -- Privilege sets and privilege subjects for Kankri.

Layer rule: authz/ imports only stdlib, third-party libraries and core/.
It does NOT import from auth/. auth/ imports from authz/, not the other way around.
"""
