"""
클럽 데이터 저장소
"""
