# Name: __init__.py
# Description: CyberSentry API package
# Date: 2026-10-12
