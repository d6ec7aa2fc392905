import tkinter as tk
from tkinter import scrolledtext

from chat_screen.config.settings import settings
from chat_screen.domain.state import ChatState
from chat_screen.providers import create_provider
from chat_screen.ui.background import BackgroundLoop
from chat_screen.ui.controller import ChatController
from chat_screen.ui.renderer import render_history


class App:
    def __init__(self, root, controller: ChatController, loop: BackgroundLoop):
        self.root = root
        self.root.title(settings.window_title)
        self.controller = controller
        self.loop = loop
        self._rendered_size = -1

        top = tk.Frame(root)
        top.pack(fill=tk.X, padx=8, pady=8)
        tk.Label(top, text="Type your question here...", fg="#5f6368").pack(anchor=tk.W)
        row = tk.Frame(top)
        row.pack(fill=tk.X)
        self.draft_var = tk.StringVar(value=controller.draft)
        self.draft_var.trace_add("write", self.on_draft_changed)
        self.entry = tk.Entry(row, textvariable=self.draft_var)
        self.entry.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.entry.bind("<Return>", self.on_send_event)
        self.send_btn = tk.Button(row, text="Send", command=self.on_send)
        self.send_btn.pack(side=tk.LEFT, padx=(6, 0))

        self.history = scrolledtext.ScrolledText(root, width=80, height=24, wrap=tk.WORD)
        self.history.pack(fill=tk.BOTH, expand=True, padx=8)
        self.history.tag_config("question", font=("TkDefaultFont", 10, "bold"))
        self.history.tag_config("answer", lmargin1=4, lmargin2=4, spacing3=12)
        self.history.config(state=tk.DISABLED)

        self.status = tk.Label(root, text="Ready", anchor=tk.W)
        self.status.pack(fill=tk.X, padx=8, pady=(0, 6))

        controller.subscribe(self.on_state_changed)
        self.on_state_changed(controller.state)

    def on_draft_changed(self, *_):
        text = self.draft_var.get()
        if text != self.controller.draft:
            self.controller.set_draft(text)

    def on_send(self):
        # 不禁用按钮：在途请求期间再次发送会发起另一条独立请求
        question = self.controller.begin_submit()
        self.loop.run(
            self.controller.client.complete(question),
            lambda result: self.controller.record(question, result),
        )

    def on_send_event(self, event):
        self.on_send()
        return "break"

    def on_state_changed(self, state: ChatState):
        if self.draft_var.get() != state.draft:
            self.draft_var.set(state.draft)
        if state.pending:
            self.status.config(text=f"Waiting for {state.pending} response(s)...")
        else:
            self.status.config(text="Ready")
        if len(state.history) != self._rendered_size:
            self.redraw(state)

    def redraw(self, state: ChatState):
        self.history.config(state=tk.NORMAL)
        self.history.delete(1.0, tk.END)
        for item in render_history(state.history):
            self.history.insert(tk.END, item.question_text + "\n", "question")
            self.history.insert(tk.END, item.answer_text + "\n", "answer")
        self.history.config(state=tk.DISABLED)
        self.history.see(1.0)
        self._rendered_size = len(state.history)


def main():
    root = tk.Tk()
    loop = BackgroundLoop(schedule=lambda fn: root.after(0, fn))
    loop.start()
    controller = ChatController(create_provider())
    App(root, controller, loop)
    try:
        root.mainloop()
    finally:
        loop.stop()


if __name__ == "__main__":
    main()
