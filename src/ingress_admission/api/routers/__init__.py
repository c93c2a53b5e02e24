"""
ingress_admission.api.routers

Router modules.
"""

# Package marker.
