"""Import processors"""
