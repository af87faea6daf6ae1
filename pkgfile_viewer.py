# pkgfile_viewer.py
import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from tkinter.scrolledtext import ScrolledText
import io
import logging
import os
from PIL import Image, ImageTk
from binary_reader import BinaryReader
from pkg_reader import read_package
from record_types import ENTRY_TYPE_TEX
from tex_errors import TexError
from tex_export import mipmap_to_image, save_texture
from tex_reader import read_texture

logger = logging.getLogger(__name__)

class PkgfileViewer:
    def __init__(self, root):
        self.root = root
        self.root.title("Pkgfile Viewer")
        self.package = None
        self.reader = None
        self.current_file = None
        self.texture_image = None
        self.textures = {}
        self.package_label = None
        self.create_widgets()
        self.setup_context_menu()

    def setup_context_menu(self):
        self.context_menu = tk.Menu(self.root, tearoff=0)
        self.context_menu.add_command(label="Extract entry...", command=self.extract_selected_entry)
        self.context_menu.add_command(label="Export texture...", command=self.export_selected_texture)
        self.tree.bind("<Button-3>", self.show_context_menu)

    def show_context_menu(self, event):
        item = self.tree.identify_row(event.y)
        if item:
            self.tree.selection_set(item)
            self.context_menu.post(event.x_root, event.y_root)

    def selected_entry(self):
        selection = self.tree.selection()
        if not selection or self.package is None:
            return None, None
        try:
            index = int(selection[0])
            return index, self.package.entries[index]
        except (ValueError, IndexError):
            return None, None

    def extract_selected_entry(self):
        index, entry = self.selected_entry()
        if entry is None:
            return
        output_path = filedialog.asksaveasfilename(
            title="Save Entry Data",
            initialfile=os.path.basename(entry.full_path),
            filetypes=(("All files", "*.*"),)
        )
        if not output_path:
            return
        try:
            data = self.package.read_entry_bytes(self.reader, entry)
            with open(output_path, 'wb') as f:
                f.write(data)
            messagebox.showinfo("Success", f"Entry successfully extracted to:\n{output_path}")
        except (TexError, OSError) as e:
            messagebox.showerror("Error", f"Failed to save entry data:\n{e}")

    def export_selected_texture(self):
        index, entry = self.selected_entry()
        if entry is None:
            return
        try:
            texture = self.decode_entry(index)
        except TexError as e:
            messagebox.showerror("Error", f"Failed to decode texture:\n{e}")
            return
        if texture is None:
            messagebox.showwarning("Warning", "Selected entry is not a static texture.")
            return
        output_dir = filedialog.askdirectory(title="Export Texture To")
        if not output_dir:
            return
        try:
            save_path = save_texture(texture, output_dir)
            messagebox.showinfo("Success", f"Texture exported to:\n{save_path}")
        except OSError as e:
            messagebox.showerror("Error", f"Failed to export texture:\n{e}")

    def create_widgets(self):
        self.package_label = tk.Label(self.root, text="Package: none", anchor="w",
                                      font=("Arial", 11, "bold"), relief=tk.GROOVE, padx=8)
        self.package_label.pack(side=tk.TOP, fill=tk.X)
        panes = ttk.PanedWindow(self.root, orient=tk.HORIZONTAL)
        panes.pack(fill=tk.BOTH, expand=True)
        panes.add(self.build_entry_list(panes), weight=1)
        side = ttk.PanedWindow(panes, orient=tk.VERTICAL)
        panes.add(side, weight=2)
        self.details = ScrolledText(side, height=12, font=("Courier", 9))
        side.add(self.details, weight=1)
        side.add(self.build_preview(side), weight=3)

    def build_entry_list(self, parent):
        frame = ttk.Frame(parent)
        ttk.Button(frame, text="Open PKG File", command=self.open_file).pack(side=tk.TOP, anchor="w", pady=4)
        columns = {"Path": 260, "Size": 90, "Details": 160}
        self.tree = ttk.Treeview(frame, columns=tuple(columns), show="headings", selectmode="browse")
        for name, width in columns.items():
            self.tree.heading(name, text=name)
            self.tree.column(name, width=width, stretch=(name == "Path"))
        tree_scroll = ttk.Scrollbar(frame, orient=tk.VERTICAL, command=self.tree.yview)
        self.tree.configure(yscrollcommand=tree_scroll.set)
        tree_scroll.pack(side=tk.RIGHT, fill=tk.Y)
        self.tree.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        self.tree.bind("<<TreeviewSelect>>", self.show_details)
        return frame

    def build_preview(self, parent):
        self.texture_frame = ttk.LabelFrame(parent, text="Texture Preview")
        self.canvas = tk.Canvas(self.texture_frame, bg='white', highlightthickness=0)
        x_scroll = ttk.Scrollbar(self.texture_frame, orient=tk.HORIZONTAL, command=self.canvas.xview)
        y_scroll = ttk.Scrollbar(self.texture_frame, orient=tk.VERTICAL, command=self.canvas.yview)
        self.canvas.configure(xscrollcommand=x_scroll.set, yscrollcommand=y_scroll.set)
        self.canvas.grid(row=0, column=0, sticky="nsew")
        y_scroll.grid(row=0, column=1, sticky="ns")
        x_scroll.grid(row=1, column=0, sticky="ew")
        self.texture_frame.rowconfigure(0, weight=1)
        self.texture_frame.columnconfigure(0, weight=1)
        self.canvas.bind('<Configure>', lambda e: self.canvas.configure(scrollregion=self.canvas.bbox("all")))
        return self.texture_frame

    def open_file(self):
        file_path = filedialog.askopenfilename(
            title="Open PKG File",
            filetypes=(("PKG files", "*.pkg"), ("All files", "*.*"))
        )
        if not file_path:
            return
        self.current_file = file_path
        self.root.title(f"Pkgfile Viewer - {os.path.basename(file_path)}")
        try:
            with open(file_path, 'rb') as f:
                self.reader = BinaryReader(io.BytesIO(f.read()))
            self.package = read_package(self.reader)
            self.package_label.config(
                text=f"Package: {self.package.magic} | {len(self.package.entries)} entries")
            self.populate_tree()
        except (TexError, OSError) as e:
            self.package = None
            self.package_label.config(text="Package: Error")
            messagebox.showerror("Error", f"Failed to read or parse PKG file:\n{e}")

    def decode_entry(self, index):
        """Decode (once) the texture stored in entry index; None when it is not one."""
        if index not in self.textures:
            entry = self.package.entries[index]
            if entry.entry_type != ENTRY_TYPE_TEX:
                self.textures[index] = None
            else:
                self.package.open_entry(self.reader, entry)
                self.textures[index] = read_texture(self.reader, entry.name)
        return self.textures[index]

    def show_texture(self, texture):
        self.canvas.delete("all")
        mipmap = texture.mipmap()
        format_text = f"Format: {mipmap.format.name} | Dimensions: {mipmap.width}x{mipmap.height}"
        self.canvas.create_text(10, 10, text=format_text, anchor=tk.NW, fill="black")
        try:
            img = mipmap_to_image(mipmap)
            if img.mode != "RGBA":
                img = img.convert("RGBA")
            canvas_width = self.texture_frame.winfo_width() - 20
            canvas_height = self.texture_frame.winfo_height() - 20
            if img.width > canvas_width or img.height > canvas_height:
                ratio = min(canvas_width / img.width, canvas_height / img.height)
                if ratio > 0:
                    img_display_width = int(img.width * ratio)
                    img_display_height = int(img.height * ratio)
                    if img_display_width > 0 and img_display_height > 0:
                        img = img.resize((img_display_width, img_display_height), Image.Resampling.LANCZOS)
            self.texture_image = ImageTk.PhotoImage(img)
            self.canvas.create_image(0, 30, anchor=tk.NW, image=self.texture_image)
            self.canvas.config(scrollregion=self.canvas.bbox("all"))
            return True
        except (TexError, OSError, ValueError) as e:
            error_message = f"Failed to display texture ({mipmap.width}x{mipmap.height}, {mipmap.format.name}):\n{e}"
            self.canvas.create_text(10, 30, text=error_message, fill="red", anchor=tk.NW, width=self.canvas.winfo_width() - 20)
            return False

    def populate_tree(self):
        self.tree.delete(*self.tree.get_children())
        self.canvas.delete("all")
        self.details.delete(1.0, tk.END)
        self.textures.clear()
        for i, entry in enumerate(self.package.entries):
            if entry.entry_type == ENTRY_TYPE_TEX:
                details_summary = f"Texture {entry.name}"
            else:
                details_summary = f"File ({entry.extension or 'no extension'})"
            self.tree.insert(
                "", "end", iid=str(i),
                values=(entry.full_path, f"{entry.length} bytes", details_summary),
                tags=(f"offset_{entry.offset}", entry.entry_type)
            )

    def show_details(self, event):
        index, entry = self.selected_entry()
        self.details.delete(1.0, tk.END)
        if entry is None:
            self.details.insert(tk.END, "Error: Could not retrieve entry details.")
            return
        self.details.insert(tk.END, f"Path: {entry.full_path}\n")
        self.details.insert(tk.END, f"Size: {entry.length} bytes\n")
        self.details.insert(tk.END, f"Offset: {entry.offset} (absolute 0x{self.package.origin + entry.offset:08X})\n")
        if entry.entry_type == ENTRY_TYPE_TEX:
            try:
                texture = self.decode_entry(index)
            except TexError as e:
                self.details.insert(tk.END, f"Decode error: {e}\n")
                self.canvas.delete("all")
                self.canvas.create_text(10, 10, text=str(e), fill="red", anchor=tk.NW)
                texture = None
            else:
                if texture is None:
                    self.details.insert(tk.END, "Not a static TEXV0005 texture (animated or unknown).\n")
                    self.canvas.delete("all")
            if texture is not None:
                header = texture.header
                container = texture.image_container
                self.details.insert(tk.END, f"Pixel Format: {header.format.name}\n")
                self.details.insert(tk.END, f"Flags: {header.flags!r}\n")
                self.details.insert(tk.END, f"Texture Size: {header.texture_width}x{header.texture_height}\n")
                self.details.insert(tk.END, f"Image Size: {header.image_width}x{header.image_height}\n")
                self.details.insert(tk.END, f"Container: {container.magic} (image format {container.image_format.name})\n")
                for image_index, image in enumerate(container.images):
                    sizes = ", ".join(f"{m.width}x{m.height}" for m in image.mipmaps)
                    self.details.insert(tk.END, f"  Image {image_index}: {len(image.mipmaps)} mipmaps ({sizes})\n")
                if container.images and container.images[0].mipmaps:
                    self.show_texture(texture)
        else:
            self.canvas.delete("all")
        try:
            record_data = self.package.read_entry_bytes(self.reader, entry)
        except TexError as e:
            self.details.insert(tk.END, f"\nCannot read entry data: {e}")
            return
        self.details.insert(tk.END, "\nHex Data (first 64 bytes or less):\n")
        max_hex_bytes = min(len(record_data), 64)
        hex_lines = []
        for i in range(0, max_hex_bytes, 16):
            chunk = record_data[i:i+16]
            hex_str = ' '.join(f"{b:02X}" for b in chunk)
            ascii_str = ''.join(chr(b) if 32 <= b <= 126 else '.' for b in chunk)
            hex_lines.append(f"{i:04X}: {hex_str:<48} {ascii_str}")
        self.details.insert(tk.END, "\n".join(hex_lines))
        if len(record_data) > max_hex_bytes:
            self.details.insert(tk.END, "\n...")

def main():
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    root = tk.Tk()
    app = PkgfileViewer(root)
    root.geometry("1200x800")
    root.mainloop()

if __name__ == "__main__":
    main()
