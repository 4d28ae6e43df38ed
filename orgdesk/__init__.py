"""orgdesk: multi-tenant organization management backend."""
