"""
Vector store nodes for the AvidFlow workflow host.

Ships the MongoDB Atlas Vector Store node and the mongoDb credential. Hosts
discover the pack through the ``avidflow.nodepacks`` entry point, see
``vectorstore_nodes.manifest.register_nodes``.
"""

__version__ = "0.1.0"
