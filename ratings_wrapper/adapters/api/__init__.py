"""
Clients des API de notes, limiteur de debit et gestion des 429.
"""
