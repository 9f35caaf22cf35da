"""
키-값 저장소

시작 시 로드, 변경 시마다 저장
- 값이 없거나 손상된 경우 기본값으로 대체 (오류는 로그만)
"""
import json
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional
from loguru import logger


class KeyValueStore(ABC):
    """키-값 저장소 인터페이스"""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """값 조회 (없거나 읽기 실패 시 default)"""

    @abstractmethod
    def set(self, key: str, value: Any) -> bool:
        """값 저장 (실패 시 False)"""


class MemoryStore(KeyValueStore):
    """메모리 저장소 (테스트/임시용)"""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any) -> bool:
        try:
            self._data[key] = json.dumps(value, ensure_ascii=False)
            return True
        except (TypeError, ValueError) as e:
            logger.error(f"저장 오류 ({key}): {e}")
            return False


class JsonFileStore(KeyValueStore):
    """JSON 파일 저장소 (키마다 파일 1개)"""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        safe_key = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.directory / f"{safe_key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"저장소 읽기 오류 ({path}): {e}")
            return default

    def set(self, key: str, value: Any) -> bool:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.directory), suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"저장소 쓰기 오류 ({path}): {e}")
            return False


def create_store(settings) -> KeyValueStore:
    """설정에 맞는 저장소 생성"""
    if settings.storage_backend == "memory":
        logger.info("메모리 저장소 사용")
        return MemoryStore()

    logger.info(f"파일 저장소 사용: {settings.data_dir}")
    return JsonFileStore(settings.data_dir)
