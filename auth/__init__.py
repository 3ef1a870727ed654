"""auth/ -- Password authentication for Kankri.

Layer rule: auth/ imports only stdlib, third-party libraries, core/ and authz/.
authz/ and core/ never import from auth/.
"""
