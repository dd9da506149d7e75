"""
Graceful Shutdown 유틸리티

SIGTERM, SIGINT 신호를 stop token(threading.Event)에 연결.
전역 플래그 대신 토큰을 워커 루프에 넘기므로 루프 여러 개를 독립적으로 구성/테스트 가능.
처리 중인 job은 끝까지 수행되고, 루프는 다음 iteration 시작 시 토큰을 보고 종료한다.
"""

from __future__ import annotations

import logging
import signal
import threading
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


def install_stop_signals(
    stop_event: threading.Event,
    signals: Optional[List[int]] = None,
    on_signal: Optional[Callable[[int], None]] = None,
) -> None:
    """SIGTERM/SIGINT 수신 시 stop_event.set(). 메인 스레드에서 호출해야 한다."""

    def _signal_handler(signum, frame):
        signal_name = signal.Signals(signum).name
        logger.info("Received %s, initiating graceful shutdown...", signal_name)
        stop_event.set()
        if on_signal is not None:
            on_signal(signum)

    for sig in signals or [signal.SIGTERM, signal.SIGINT]:
        signal.signal(sig, _signal_handler)
    logger.info("Graceful shutdown handlers registered")
