"""Auxiliary reports built from converted trees."""
