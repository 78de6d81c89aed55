"""HTTP serving layer"""
