"""Cryptographic primitives used by passport_decrypt."""
