"""Financial reporting, portfolio analytics and plan quotas for landlords."""

__version__ = "0.1.0"
