"""
Configuration constants for MatchSheet
"""
import os

# Branding shown in the sheet header - can be overridden by environment variables
CLUB_NAME = os.environ.get('CLUB_NAME', 'Club Atlético Unión')
CLUB_LOCATION = os.environ.get('CLUB_LOCATION', 'Sunchales - Santa Fe')
PRIMARY_COLOR = os.environ.get('PRIMARY_COLOR', '#004A2F')

# Club emblem, fetched without credentials. Set EMBLEM_URL="" to disable it.
EMBLEM_URL = os.environ.get(
    'EMBLEM_URL',
    'https://upload.wikimedia.org/wikipedia/commons/thumb/3/3b/'
    'Escudo_del_Club_Atl%C3%A9tico_Uni%C3%B3n_de_Sunchales.svg/'
    '250px-Escudo_del_Club_Atl%C3%A9tico_Uni%C3%B3n_de_Sunchales.svg.png'
)
EMBLEM_TIMEOUT = float(os.environ.get('EMBLEM_TIMEOUT', '10'))

# Export resolution (pixel scale relative to the on-screen page)
PNG_PIXEL_SCALE = int(os.environ.get('PNG_PIXEL_SCALE', '2'))
PDF_PIXEL_SCALE = int(os.environ.get('PDF_PIXEL_SCALE', '3'))

# Development server
HOST = os.environ.get('HOST', '127.0.0.1')
PORT = int(os.environ.get('PORT', '8080'))
