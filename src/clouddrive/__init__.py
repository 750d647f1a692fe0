"""CloudDrive: presigned direct-to-S3 file management."""
