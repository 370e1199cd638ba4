"""Network tools for domainsweep."""
