"""auth/ -- Session authentication package for Session Gate.

Leaf-first: identifiers (AES-GCM user IDs) -> tokens (class-scoped JWTs)
-> issuer (credential pairs, cookie directives) -> gate (per-request
admit/rotate/reject).

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/. api/ imports from auth/, not the other way around.
"""
