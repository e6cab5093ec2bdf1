"""
Bracket topology, resolution engine and standings for a 32-player
placement tournament.
"""
