"""tRPC-compatible RPC surface mounted at ``/trpc``."""
