"""
Remote procedure endpoint.

``procedures`` lists what can be called, ``router`` implements the
HTTP encoding of single and batched calls.
"""
