"""与具体 GUI 工具包无关的界面逻辑：控制器、渲染投影、后台事件循环。"""
