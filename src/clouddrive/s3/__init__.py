"""Storage operations on S3--the "R" and "D" of CRUD plus presigned URLs for direct transfer."""
