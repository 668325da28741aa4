"""互动故事服务异常"""


class GenerationParseError(RuntimeError):
    """LLM 返回内容无法解析为预期的 JSON 结构。"""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class UnknownChoicePointError(LookupError):
    """故事中不存在该选择点。"""

    def __init__(self, choice_point_id: str):
        super().__init__(f"选择点不存在: {choice_point_id}")
        self.choice_point_id = choice_point_id


class UnknownOptionError(LookupError):
    """选择点中不存在该选项。"""

    def __init__(self, choice_point_id: str, option_id: str):
        super().__init__(f"选项不存在: {option_id} (选择点 {choice_point_id})")
        self.choice_point_id = choice_point_id
        self.option_id = option_id


class ChoicePointNotReachableError(UnknownChoicePointError):
    """选择点存在，但不是会话当前等待的那一个。"""

    def __init__(self, choice_point_id: str, expected: str | None):
        LookupError.__init__(self, f"当前不能在 {choice_point_id} 做选择（应为 {expected or '无'}）")
        self.choice_point_id = choice_point_id
        self.expected = expected


class SessionNotFoundError(LookupError):
    def __init__(self, session_id: str):
        super().__init__(f"会话不存在: {session_id}")
        self.session_id = session_id


class SessionCompletedError(RuntimeError):
    """会话已结束，不能继续选择。"""

    def __init__(self, session_id: str, status: str):
        super().__init__(f"会话已结束: {session_id} (status={status})")
        self.session_id = session_id
        self.status = status


class ReportNotReadyError(RuntimeError):
    """会话尚未读到结局，不能生成家长报告。"""

    def __init__(self, session_id: str):
        super().__init__(f"会话尚未完成，无法生成报告: {session_id}")
        self.session_id = session_id
