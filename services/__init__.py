"""
Creative Suite Services

- video_generation: long-running video synthesis client
"""
