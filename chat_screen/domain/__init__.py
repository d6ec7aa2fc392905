"""领域层模型与协议。

包含：
- models: Exchange / CompletionResult 以及统一的 ChatRequest / ChatResult 模型。
- envelope: 补全接口响应 JSON 的线格式校验模型。
- state: 界面唯一的可变状态（草稿、历史、在途请求数）。
- exceptions: 业务异常类型定义。
"""
