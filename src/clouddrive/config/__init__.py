"""
Configuration management for CloudDrive.

Contains the Pydantic settings shared by the API server and the client commands.
"""
