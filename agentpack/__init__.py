"""agentpack: deploy agent template packs into a tenant's Entity Store."""

__version__ = "0.1.0"
