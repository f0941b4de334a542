"""Coeur du domaine : entites, objets valeur et ports."""
