"""
Exchange access: signing, request building, envelope decoding and the REST client.
"""
