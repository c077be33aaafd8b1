"""
Services package

Organization:
    - pipeline/: segment -> render -> compose video pipeline
    - infrastructure/: storage hygiene
"""
