"""Integraciones externas usadas por la API.

Centraliza los adaptadores a proveedores de búsqueda OSINT (teléfono,
correo y geolocalización IP), manteniendo el código de la API delgado y
configurable vía variables de entorno.
"""
