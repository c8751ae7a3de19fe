"""auth/ -- Token issuance and Facebook login for AuthGate.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/, web/, or client/.
api/ and web/ import from auth/, not the other way around.
"""
