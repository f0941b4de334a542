"""Persistance SQLModel (miroir IMDb local, suivi des scrapings)."""
