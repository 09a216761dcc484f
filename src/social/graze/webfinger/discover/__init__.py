"""
Identifier Discovery

This package resolves identifiers (acct: URIs, e-mail like handles, URLs) to
their resource descriptors using WebFinger, with the legacy host-meta and LRDD
mechanisms as fallback.

Key Components:
- client.py: The WebFinger discovery engine
- reaction.py: Discovery results and errors
- fetch.py: HTTP fetch capability (aiohttp)
- cache.py: TTL cache around fetches (in-memory or Redis)

The discovery flow:
1. Normalize the identifier and extract its host
2. Try https://{host}/.well-known/webfinger
3. On failure, load https://{host}/.well-known/host-meta (then http://)
4. Follow the host-meta "lrdd" template to the identifier's document
5. Merge the host's OpenID provider links into the result

Every step reports failures in the returned Reaction instead of raising, so a
partial result (for example host-meta links without a user document) can still
be used.
"""
