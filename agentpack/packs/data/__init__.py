"""Packs bundled with agentpack, one JSON document per pack."""
