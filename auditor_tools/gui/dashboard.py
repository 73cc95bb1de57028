# auditor_tools/gui/dashboard.py

from dataclasses import dataclass

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QFrame, QGridLayout, QLabel, QPushButton, QVBoxLayout, QWidget

FILE_CONVERSION_TASK = "file-conversion"


@dataclass(frozen=True)
class TaskInfo:
    task_id: str
    badge: str
    title: str
    description: str
    footer: str
    enabled: bool = False


TASKS = [
    TaskInfo(FILE_CONVERSION_TASK, "File Conversion", "Convert to LLM-friendly formats",
             "Normalize mixed evidence sets into formats that work cleanly with LLM tools "
             "while preserving structure where possible.",
             "Input: folders and zip files", enabled=True),
    TaskInfo("docx-unlocker", "DOCX/XLSX Unlocker", "Remove document protection",
             "Strip editing and form protections from DOCX and XLSX evidence files.",
             "Input: DOCX, XLSX"),
    TaskInfo("checkbox-fixer", "DOCX Checkbox Fixer", "Normalize form checkboxes",
             "Convert form-fillable checkboxes into simple, stable symbols.",
             "Target: PCI DSS templates, internal forms"),
    TaskInfo("pci-qa", "PCI DSS QA Tool", "Run structured QA on ROCs/AOCs",
             "Apply a repeatable QA checklist to ROCs and AOCs and export findings for review.",
             "Focus: ROC consistency, scoping, evidence mapping"),
    TaskInfo("auto-file-opener", "Auto-file-opener", "Rapid evidence folder review",
             "Iterate through all files in an evidence folder using your default system viewers.",
             "Review quickly and annotate"),
    TaskInfo("roc-checkbox-report", "PCI DSS ROC Checkbox Report", "Export a complete checkbox state matrix",
             "Parse ROC documents, detect checkbox states and summarize all responses by requirement.",
             "Use case: peer review, QA, variance analysis"),
]


class TaskCard(QFrame):
    """A dashboard card. Disabled cards are greyed out and marked as coming soon."""
    activated = Signal(str)

    def __init__(self, task: TaskInfo, parent=None):
        super().__init__(parent)
        self.task = task
        self.setObjectName("TaskCard")
        self.setFrameShape(QFrame.StyledPanel)

        layout = QVBoxLayout(self)
        badge = QLabel(task.badge)
        badge.setObjectName("TaskBadge")
        title = QLabel(task.title)
        title.setObjectName("TaskTitle")
        description = QLabel(task.description)
        description.setWordWrap(True)
        footer = QLabel(task.footer if task.enabled else f"{task.footer} (coming soon)")
        footer.setObjectName("TaskFooter")

        self.open_button = QPushButton("Open" if task.enabled else "Coming soon")
        self.open_button.setEnabled(task.enabled)
        self.open_button.clicked.connect(lambda: self.activated.emit(task.task_id))

        for widget in (badge, title, description):
            layout.addWidget(widget)
        layout.addStretch()
        layout.addWidget(footer)
        layout.addWidget(self.open_button, alignment=Qt.AlignRight)
        self.setEnabled(task.enabled)


class DashboardPage(QWidget):
    """The landing page: a grid of task cards."""
    task_selected = Signal(str)

    COLUMNS = 3

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        heading = QLabel("Choose a tool to get started")
        heading.setObjectName("PageTitle")
        layout.addWidget(heading)

        grid = QGridLayout()
        self.cards = {}
        for i, task in enumerate(TASKS):
            card = TaskCard(task)
            card.activated.connect(self.task_selected)
            grid.addWidget(card, i // self.COLUMNS, i % self.COLUMNS)
            self.cards[task.task_id] = card
        layout.addLayout(grid)
        layout.addStretch()
