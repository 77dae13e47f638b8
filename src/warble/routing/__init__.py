"""Routing: command registry, tokenizer and resolver.

Commands are registered into a tree of groups and leaves; each inbound
message is resolved against it in O(path-depth).
"""
