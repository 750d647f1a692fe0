"""
Client side of CloudDrive.

Talks to the API over HTTP and moves file bytes directly to and from S3
with the presigned URLs the API hands out.
"""
