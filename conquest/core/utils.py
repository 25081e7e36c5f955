import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def format_info(depth, score, nodes, elapsed, move):
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    move_str = f"{move[0]},{move[1]}" if move else "-"
    score_str = "none" if score is None else f"{score:+d}"
    return f"info depth {depth} score {score_str} nodes {nodes} nps {nps} time {int(elapsed * 1000)} move {move_str}"
