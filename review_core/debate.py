"""Debate engine: pro/con generation, turn-taking and the debate lifecycle.

A debate starts ``active`` and ends either ``concluded`` or ``abandoned``.
Both end states are final; every operation that adds to a debate requires
it to still be active and raises InvalidState otherwise.
"""

import asyncio
import json
import logging
import re
from datetime import datetime, timedelta

from config.config_loader import DebateConfig, PipelineConfig, PromptsConfig
from review_core import fallback
from review_core.client import TextGenerationClient
from review_core.errors import InvalidState, NotFound
from review_core.guard import RetryTimeoutGuard
from review_core.models import (
    ArgumentSource,
    ArgumentType,
    CodeChange,
    DebateAnalytics,
    DebateArgument,
    DebateArguments,
    DebateConclusion,
    DebateContext,
    DebateResponse,
    DebateSession,
    DebateStatus,
    GenerationParams,
)
from review_core.result import ErrorKind, Result, degrade
from review_core.store import DebateStore

logger = logging.getLogger(__name__)

AI_ARGUMENT_CONFIDENCE = 0.6
USER_ARGUMENT_CONFIDENCE = 0.5
# Counter-arguments read from plain text rather than JSON
_PLAIN_COUNTER_CONFIDENCE = 0.5
_MIN_POINT_LENGTH = 10
_TOP_PARTICIPANTS = 5

_LIST_PREFIX = re.compile(r"^\d+\.\s*")
_JSON_DECODER = json.JSONDecoder()


def parse_debate_points(text: str, limit: int = 3) -> list[str]:
    """Numbered or plain lines longer than ten characters, first ``limit`` only."""
    points = [_LIST_PREFIX.sub("", line.strip()).strip() for line in text.splitlines() if line.strip()]
    return [p for p in points if len(p) > _MIN_POINT_LENGTH][:limit]


def parse_follow_up_questions(text: str, limit: int = 2) -> list[str]:
    return [line.strip() for line in text.splitlines() if "?" in line][:limit]


def _find_json_object(text: str) -> dict | None:
    """First ``{...}`` in ``text`` that decodes to a dict with a non-blank ``content``."""
    start = text.find("{")
    while start != -1:
        try:
            payload, _ = _JSON_DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("content"), str) and payload["content"].strip():
            return payload
        start = text.find("{", start + 1)
    return None


def parse_counter_argument(text: str, target: DebateArgument) -> Result[DebateArgument]:
    """Read a counter-argument from a JSON object, else from the first usable line."""
    payload = _find_json_object(text)
    if payload is not None:
        try:
            confidence = float(payload.get("confidence", AI_ARGUMENT_CONFIDENCE))
        except (TypeError, ValueError):
            confidence = AI_ARGUMENT_CONFIDENCE
        evidence = payload.get("evidence")
        return Result.success(DebateArgument(
            content=payload["content"].strip(),
            type=target.type.opposite(),
            confidence=max(0.0, min(1.0, confidence)),
            source=ArgumentSource.AI,
            evidence=[str(e) for e in evidence] if isinstance(evidence, list) else [],
        ))

    points = parse_debate_points(text, limit=1)
    if not points:
        return Result.failure(ErrorKind.PARSE_ERROR, "No counter-argument found in model output")
    return Result.success(DebateArgument(
        content=points[0],
        type=target.type.opposite(),
        confidence=_PLAIN_COUNTER_CONFIDENCE,
        source=ArgumentSource.AI,
    ))


def _non_empty(items: list[str], what: str) -> Result[list[str]]:
    if not items:
        return Result.failure(ErrorKind.PARSE_ERROR, f"No {what} found in model output")
    return Result.success(items)


def _non_blank(text: str) -> Result[str]:
    text = text.strip()
    if not text:
        return Result.failure(ErrorKind.PARSE_ERROR, "Blank reply in model output")
    return Result.success(text)


class DebateEngine:
    def __init__(
        self,
        client: TextGenerationClient,
        guard: RetryTimeoutGuard,
        store: DebateStore,
        prompts: PromptsConfig,
        pipeline: PipelineConfig,
        config: DebateConfig,
    ) -> None:
        self._client = client
        self._guard = guard
        self._store = store
        self._prompts = prompts
        self._pipeline = pipeline
        self._config = config
        self._params = GenerationParams(max_tokens=config.max_tokens, temperature=config.temperature)

    @property
    def fallback_mode(self) -> bool:
        return self._pipeline.fallback_mode or not self._client.is_configured

    def describe_change(self, code_change: CodeChange) -> str:
        return self._prompts.debate_base.format(
            line_start=code_change.line_start,
            line_end=code_change.line_end,
            original_code=code_change.original_code,
            proposed_code=code_change.proposed_code,
            reason=code_change.reason,
        )

    async def _generate(self, prompt: str, label: str) -> Result[str]:
        return await self._guard.run(
            lambda: self._client.generate(prompt, self._params),
            max_retries=self._pipeline.max_retries,
            timeout_ms=self._pipeline.timeout_ms,
            label=label,
        )

    # --- lookups -----------------------------------------------------------

    def get(self, debate_id: str) -> DebateSession:
        return self._store.get(debate_id)

    def active_sessions(self, session_id: str) -> list[DebateSession]:
        active = [d for d in self._store.find(session_id) if d.is_active]
        return sorted(active, key=lambda d: d.created_at, reverse=True)

    def analytics(self, session_id: str) -> DebateAnalytics:
        debates = self._store.find(session_id)
        total_arguments = sum(len(d.arguments) for d in debates)

        counts: dict[str, int] = {}
        for debate in debates:
            for argument in debate.arguments:
                if argument.source is ArgumentSource.USER:
                    user = argument.user_id or "anonymous"
                    counts[user] = counts.get(user, 0) + 1
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)

        return DebateAnalytics(
            total_debates=len(debates),
            active_debates=sum(1 for d in debates if d.status is DebateStatus.ACTIVE),
            concluded_debates=sum(1 for d in debates if d.status is DebateStatus.CONCLUDED),
            average_arguments_per_debate=total_arguments / len(debates) if debates else 0.0,
            most_active_participants=ranked[:_TOP_PARTICIPANTS],
        )

    # --- lifecycle ---------------------------------------------------------

    def _require_active(self, debate_id: str, operation: str) -> DebateSession:
        debate = self._store.get(debate_id)
        if not debate.is_active:
            raise InvalidState(debate.id, debate.status.value, operation)
        return debate

    def _append(self, debate_id: str, new_arguments: list[DebateArgument]) -> None:
        debate = self._require_active(debate_id, "add arguments to")
        debate.arguments.extend(new_arguments)
        debate.updated_at = datetime.now()
        self._store.save(debate)

    def _open_debate(
        self,
        code_change: CodeChange,
        session_id: str,
        code_snippet_id: str,
        topic: str | None,
        participants: list[str] | None,
    ) -> DebateSession:
        existing = self._store.find_active_for_change(session_id, code_change.id)
        if existing is not None:
            logger.debug("Reusing active debate %s for change %s", existing.id, code_change.id)
            return existing

        now = datetime.now()
        debate = DebateSession(
            topic=topic or f"Lines {code_change.line_start}-{code_change.line_end}: {code_change.reason}",
            code_context=f"{code_change.original_code}\n---\n{code_change.proposed_code}",
            session_id=session_id,
            code_snippet_id=code_snippet_id,
            code_change_id=code_change.id,
            participants=list(participants or []),
            created_at=now,
            updated_at=now,
            expires_at=now + timedelta(days=self._config.expiry_days),
        )
        self._store.save(debate)
        logger.info("Opened debate %s for session %r", debate.id, session_id)
        return debate

    async def start(
        self,
        code_change: CodeChange,
        session_id: str = "",
        code_snippet_id: str = "",
        topic: str | None = None,
        participants: list[str] | None = None,
    ) -> DebateArguments:
        """Open (or reuse) the debate for this change and produce pro/con points."""
        debate = self._open_debate(code_change, session_id, code_snippet_id, topic, participants)

        if self.fallback_mode:
            result = fallback.debate_arguments(code_change, debate.id)
            pro_confidence = con_confidence = fallback.FALLBACK_CONFIDENCE
        else:
            base = self.describe_change(code_change)
            pro, con = await asyncio.gather(
                self._generate(self._prompts.debate_for.format(debate=base), "pro arguments"),
                self._generate(self._prompts.debate_against.format(debate=base), "con arguments"),
            )
            pro = pro.bind(lambda text: _non_empty(parse_debate_points(text, self._config.max_points), "arguments"))
            con = con.bind(lambda text: _non_empty(parse_debate_points(text, self._config.max_points), "arguments"))
            result = DebateArguments(
                arguments=degrade(pro, list(fallback.PRO_ARGUMENTS), "pro arguments"),
                counter_arguments=degrade(con, list(fallback.CON_ARGUMENTS), "con arguments"),
                context=DebateContext(code_change=code_change, debate_id=debate.id),
            )
            pro_confidence = AI_ARGUMENT_CONFIDENCE if pro.ok else fallback.FALLBACK_CONFIDENCE
            con_confidence = AI_ARGUMENT_CONFIDENCE if con.ok else fallback.FALLBACK_CONFIDENCE

        self._append(debate.id, [
            *(DebateArgument(p, ArgumentType.PRO, pro_confidence, ArgumentSource.AI) for p in result.arguments),
            *(DebateArgument(c, ArgumentType.CON, con_confidence, ArgumentSource.AI) for c in result.counter_arguments),
        ])
        return result

    async def continue_debate(self, context: DebateContext, user_input: str) -> DebateResponse:
        """Reply to the user's input and return the context extended by one turn.

        A context without a debate id is treated as a free-standing exchange
        and is not recorded anywhere.
        """
        if context.debate_id is not None:
            self._require_active(context.debate_id, "continue")

        if self.fallback_mode:
            response = fallback.debate_response(context, user_input)
        else:
            base = self.describe_change(context.code_change)
            reply_prompt = self._prompts.debate_continue.format(
                debate=base,
                previous_arguments=", ".join(context.previous_arguments),
                user_input=user_input,
            )
            reply, questions = await asyncio.gather(
                self._generate(reply_prompt, "debate reply"),
                self._generate(self._prompts.debate_follow_up.format(debate=base), "follow-up questions"),
            )
            reply_text = degrade(reply.bind(_non_blank), fallback.DEBATE_REPLY, "debate reply")
            follow_ups = degrade(
                questions.bind(lambda text: _non_empty(
                    parse_follow_up_questions(text, self._config.max_follow_ups), "follow-up questions",
                )),
                list(fallback.FOLLOW_UP_QUESTIONS),
                "follow-up questions",
            )
            response = DebateResponse(
                response=reply_text,
                follow_up_questions=follow_ups,
                context=context.extended(reply_text, user_input),
            )

        if context.debate_id is not None:
            self._append(context.debate_id, [
                DebateArgument(user_input, ArgumentType.NEUTRAL, USER_ARGUMENT_CONFIDENCE, ArgumentSource.USER),
                DebateArgument(response.response, ArgumentType.NEUTRAL, AI_ARGUMENT_CONFIDENCE, ArgumentSource.AI),
            ])
        return response

    def add_user_argument(
        self,
        debate_id: str,
        user_id: str,
        content: str,
        argument_type: ArgumentType = ArgumentType.NEUTRAL,
        confidence: float = USER_ARGUMENT_CONFIDENCE,
        evidence: list[str] | None = None,
    ) -> DebateArgument:
        debate = self._require_active(debate_id, "add an argument to")
        argument = DebateArgument(
            content=content,
            type=argument_type,
            confidence=max(0.0, min(1.0, confidence)),
            source=ArgumentSource.USER,
            evidence=list(evidence or []),
            user_id=user_id,
        )
        if user_id not in debate.participants:
            debate.participants.append(user_id)
        self._append(debate_id, [argument])
        return argument

    async def generate_counter_argument(self, debate_id: str, target_argument_id: str) -> DebateArgument:
        debate = self._require_active(debate_id, "counter an argument in")
        target = next((a for a in debate.arguments if a.id == target_argument_id), None)
        if target is None:
            raise NotFound("Debate argument", target_argument_id)

        if self.fallback_mode:
            counter = fallback.counter_argument(target)
        else:
            prompt = self._prompts.debate_counter.format(
                position=target.type.value,
                argument=target.content,
                evidence=", ".join(target.evidence) or "none given",
                code_context=debate.code_context,
                topic=debate.topic,
            )
            generated = await self._generate(prompt, "counter-argument")
            counter = degrade(
                generated.bind(lambda text: parse_counter_argument(text, target)),
                fallback.counter_argument(target),
                "counter-argument",
            )

        self._append(debate_id, [counter])
        return counter

    def conclude(self, debate_id: str, summary: str, recommendation: str, confidence: float) -> DebateSession:
        debate = self._require_active(debate_id, "conclude")
        debate.status = DebateStatus.CONCLUDED
        debate.conclusion = DebateConclusion(
            summary=summary,
            recommendation=recommendation,
            confidence=max(0.0, min(1.0, confidence)),
        )
        debate.updated_at = datetime.now()
        self._store.save(debate)
        logger.info("Debate %s concluded", debate_id)
        return debate

    def abandon(self, debate_id: str) -> DebateSession:
        debate = self._require_active(debate_id, "abandon")
        debate.status = DebateStatus.ABANDONED
        debate.updated_at = datetime.now()
        self._store.save(debate)
        logger.info("Debate %s abandoned", debate_id)
        return debate
