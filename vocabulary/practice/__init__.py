"""
Practice helpers: bulk-entry parsing (``bulk``) and section rotation
(``rotation``).
"""
