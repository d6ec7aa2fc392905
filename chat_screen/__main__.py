from chat_screen.gui.app import main

main()
