"""
promptgallery - Gallery of AI-generated images and the prompts behind them

A Streamlit application for browsing and curating a prompt gallery with features including:
- Movie-themed categories with a derived category filter
- Client-side JPEG compression before upload
- Supabase (or DuckDB / Google Cloud Storage) backed persistence
- Admin-only upload and delete behind password sign-in
"""

__version__ = "0.1.0"
__author__ = "promptgallery"
__description__ = "Gallery of AI-generated images and the prompts behind them"
