"""Flex reviews server application package."""
