"""Services applicatifs : resolution d'identifiants, consolidation, batch."""
