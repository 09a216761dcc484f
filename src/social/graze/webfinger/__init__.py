"""
Graze WebFinger - identifier discovery for the social web

This library resolves identity-like identifiers ("user@example.org", acct:
URIs, URLs) to the resource descriptors that describe them, using WebFinger
(RFC 7033) with the legacy host-meta / LRDD mechanism (RFC 6415) as fallback.

Key Components:
- xrd: The document model and its two wire formats, JRD (JSON) and XRD (XML)
- discover: The discovery engine, its fetch capability and fetch cache
- config: Environment based settings and client wiring
- cli: Command line interface (python -m social.graze.webfinger)

Architecture Overview:
1. Documents:
   - Loaders turn raw JSON or XML into a Document (subject, aliases, expiry,
     links, properties); the format is detected from the content when it is
     not given
   - Serializers write a Document back out in either format

2. Discovery:
   - WebFinger endpoint first, then host-meta and its LRDD template
   - Each fetch goes through a TTL cache (in-memory or Redis)
   - Results carry a secure flag that is only set when the whole chain was
     fetched over HTTPS

Discovery failures are reported in the returned result rather than raised, so
partially resolved data remains available to the caller.
"""
