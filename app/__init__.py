"""
Fencing Club Leaderboard 웹 애플리케이션
"""
