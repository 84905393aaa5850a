"""Credential encryption, webhook signatures and webhook ingestion."""
