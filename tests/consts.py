"""Constants used in tests."""

TEST_BUCKET_NAME = "some-bucket"
TEST_REGION = "us-east-1"
