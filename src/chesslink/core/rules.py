"""Rules adapter: a thin, pure facade over python-chess."""

from __future__ import annotations

import chess

from chesslink.core.enums import Color
from chesslink.core.errors import IllegalMoveError, ParseError, ProtocolError
from chesslink.core.outcome import GameOutcome

_PROMOTION_PIECES = {
    "q": chess.QUEEN,
    "r": chess.ROOK,
    "b": chess.BISHOP,
    "n": chess.KNIGHT,
}

_DRAW_REASONS = {
    chess.Termination.STALEMATE: "stalemate",
    chess.Termination.INSUFFICIENT_MATERIAL: "insufficient material",
    chess.Termination.SEVENTYFIVE_MOVES: "seventy-five-move rule",
    chess.Termination.FIVEFOLD_REPETITION: "fivefold repetition",
    chess.Termination.FIFTY_MOVES: "fifty-move rule",
    chess.Termination.THREEFOLD_REPETITION: "threefold repetition",
}

# Board statuses that leave no playable game. Anything else python-chess
# flags (odd piece counts, stale castling rights) is accepted.
_UNPLAYABLE = (
    chess.STATUS_EMPTY
    | chess.STATUS_NO_WHITE_KING
    | chess.STATUS_NO_BLACK_KING
    | chess.STATUS_TOO_MANY_KINGS
    | chess.STATUS_PAWNS_ON_BACKRANK
    | chess.STATUS_OPPOSITE_CHECK
)


class Rules:
    """Static rule-checker that operates on a :class:`chess.Board`.

    Every method is a pure function: boards passed in are never mutated.
    """

    @staticmethod
    def initial_position() -> chess.Board:
        return chess.Board()

    @staticmethod
    def load_fen(fen: str) -> chess.Board:
        try:
            board = chess.Board(fen.strip())
        except ValueError as exc:
            raise ParseError(f"Invalid FEN {fen!r}: {exc}") from exc
        board.castling_rights = board.clean_castling_rights()
        status = board.status() & _UNPLAYABLE
        if status:
            raise ParseError(f"Unplayable position {fen!r}: {status!r}")
        return board

    @staticmethod
    def to_fen(position: chess.Board) -> str:
        return position.fen()

    @staticmethod
    def side_to_move(position: chess.Board) -> Color:
        return Color.from_chess(position.turn)

    @staticmethod
    def legal_move(
        position: chess.Board,
        from_square: str,
        to_square: str,
        promotion: str | None = None,
    ) -> chess.Move:
        """Build and validate a move from square names.

        A pawn reaching the last rank without a *promotion* hint promotes
        to a queen.
        """
        try:
            src = chess.parse_square(from_square.strip().lower())
            dst = chess.parse_square(to_square.strip().lower())
        except ValueError as exc:
            raise IllegalMoveError(
                f"Unknown square in {from_square}-{to_square}"
            ) from exc

        piece_type: chess.PieceType | None = None
        if promotion:
            piece_type = _PROMOTION_PIECES.get(promotion.strip().lower()[:1])
            if piece_type is None:
                raise IllegalMoveError(f"Unknown promotion piece {promotion!r}")
        elif (
            position.piece_type_at(src) == chess.PAWN
            and chess.square_rank(dst) in (0, 7)
        ):
            piece_type = chess.QUEEN

        move = chess.Move(src, dst, promotion=piece_type)
        if not position.is_legal(move):
            raise IllegalMoveError(f"Illegal move {move.uci()} in {position.fen()}")
        return move

    @staticmethod
    def apply_move(position: chess.Board, move: chess.Move) -> chess.Board:
        if not position.is_legal(move):
            raise IllegalMoveError(f"Illegal move {move.uci()} in {position.fen()}")
        board = position.copy()
        board.push(move)
        return board

    @staticmethod
    def parse_remote_move(position: chess.Board, notation: str) -> chess.Move:
        """Parse an engine reply (UCI first, SAN as fallback).

        A leading ``bestmove`` token and any trailing ``ponder`` suffix are
        tolerated.
        """
        tokens = notation.split()
        if tokens and tokens[0] == "bestmove":
            tokens = tokens[1:]
        if not tokens:
            raise ProtocolError(f"Empty move from remote: {notation!r}")
        text = tokens[0]
        try:
            move: chess.Move | None = position.parse_uci(text)
        except ValueError:
            move = None
        if move is None:
            try:
                move = position.parse_san(text)
            except ValueError as exc:
                raise ProtocolError(
                    f"Remote sent illegal move {text!r} in {position.fen()}"
                ) from exc
        if not move:
            raise ProtocolError(f"Remote sent a null move: {notation!r}")
        return move

    @staticmethod
    def move_to_uci(move: chess.Move) -> str:
        return move.uci()

    @staticmethod
    def classify(position: chess.Board) -> GameOutcome:
        """Checkmate, draw or in-progress; claimable draws count as draws."""
        outcome = position.outcome(claim_draw=True)
        if outcome is None:
            return GameOutcome.in_progress()
        if outcome.termination == chess.Termination.CHECKMATE:
            assert outcome.winner is not None
            return GameOutcome.checkmate(Color.from_chess(outcome.winner))
        return GameOutcome.draw(_DRAW_REASONS.get(outcome.termination, "draw"))
