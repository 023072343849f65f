"""HTTP API for lifetrack"""
