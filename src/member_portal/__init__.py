"""Member portal with a resilient office-holder directory.

The directory section is built from two feeds of an external directory
service. Each feed falls back to its last-known-good snapshot on disk, and
the rendered page sits behind a 300-second TTL cache:

- **Feed client**: one authenticated POST per feed id
- **Fallback loader**: remote feed, else the snapshot in ``tmp/``
- **Aggregator**: strict parse into a sorted, de-duplicated directory
- **Page cache**: at most one rebuild per expiry, even under load

Run the server with: ``uvicorn member_portal.main:app``
"""
