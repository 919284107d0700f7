"""
Plugin License Client Django project.
"""
