"""Adaptateurs concrets des ports du domaine."""
