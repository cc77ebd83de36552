"""Istio post-install verifier (meshverify).

Check that the resources an Istio installation asks for exist in a live cluster and are healthy.
"""

__version__ = "0.1.0"
__author__ = "Platform Engineering Team"
__license__ = "Apache-2.0"
